from agentrun.cli import main

main()
