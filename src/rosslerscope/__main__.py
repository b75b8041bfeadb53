from rosslerscope.cli import main

main()
