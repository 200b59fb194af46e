from shellkit.cli import main

main()
