from harbormaster.cli import main

main()
