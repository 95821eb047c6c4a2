from devpair.cli import main

main()
