from terraform_wheels.cli.app import main

main()
