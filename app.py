from src.schulte_trainer.app.entrypoint import main

main()
