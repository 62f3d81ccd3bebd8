from cargo_play.cli import main

main()
