from cookie_scanner.cli import main

main()
