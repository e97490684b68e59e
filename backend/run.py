from kickoff import create_app, serve

app = create_app()

if __name__ == '__main__':
    serve(app)
