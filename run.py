from coachplan import create_app
from coachplan.extensions import db, migrate

app = create_app()
migrate.init_app(app, db)

if __name__ == '__main__':
    app.run(debug=app.config.get("DEBUG", False), port=5000)
