from tsmwa_admin import create_app

app = create_app()

if __name__ == "__main__":
    try:
        app.run(host="127.0.0.1", port=5001, debug=True)
    finally:
        app.extensions["data_access"].close()
