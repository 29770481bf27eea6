from autorel.cli.app import main

main()
