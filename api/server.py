from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv
import logging
import os

load_dotenv()

from core.config import LOG_LEVEL, SCRIPTURE_DB  # noqa: E402
from routes.scripture_api import scripture_bp  # noqa: E402

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = Flask(__name__)

app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "change-me")
app.config["SCRIPTURE_DB"] = SCRIPTURE_DB

CORS(app)

# Register blueprints (creates scripture tables on first registration)
app.register_blueprint(scripture_bp)

if __name__ == "__main__":
    app.run(host="127.0.0.1", port=int(os.getenv("PORT", "5055")))
