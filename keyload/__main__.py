from keyload.cli import main

main()
