from ride_analyzer.cli import main

main()
