from devsetup.cli import main

main()
