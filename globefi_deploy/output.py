from rich.console import Console

# progress goes to stderr, stdout only ever carries the deployed address
console = Console(stderr=True, highlight=False)


def report(label, value):
    console.print(f"{label}: [green]{value}[/green]")
