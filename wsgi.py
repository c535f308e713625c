from bioalgos import create_app

app = create_app()
