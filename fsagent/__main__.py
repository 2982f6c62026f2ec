from fsagent.cli import main

main()
