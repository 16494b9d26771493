from dotsort._cli.main import main

main()
