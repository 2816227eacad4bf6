from globefi_deploy.cli import main

main()
