from carease.app_factory import create_app


# Logging is installed by create_app, so `flask --app main run` and WSGI servers get it too
app = create_app()


if __name__ == "__main__":
    """
    Dedicated entrypoint for the CareEase API.
    `flask --app main seed` loads the sample dataset into an empty database,
    `flask --app main create-admin EMAIL NAME` adds an admin account.
    """
    app.run(host="0.0.0.0", port=5001, debug=app.config.get("DEBUG", False))
