from actor_runner.server import main

main()
