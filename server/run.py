import logging

from flask import Flask
from config import Config
from server.carpark.extensions import db, cors
from server.carpark.ledger import SqlAlchemySpaceLedger


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize extensions
    db.init_app(app)
    cors.init_app(app, origins=app.config["CORS_ORIGINS"])

    # Register blueprints
    from server.carpark.blueprints.parking import parking_bp
    from server.carpark.blueprints.api import api_bp

    app.register_blueprint(parking_bp)
    app.register_blueprint(api_bp)

    # Import models BEFORE create_all()
    with app.app_context():
        from server.carpark.models import ParkingSpace  # noqa: F401

        db.create_all()

        # Seed the fixed set of spaces on first start
        created = SqlAlchemySpaceLedger(db.session).seed(app.config["TOTAL_SPACES"])
        if created:
            app.logger.info("Car park initialised with %d spaces", created)

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=5000, debug=True)
