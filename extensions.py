from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_login import LoginManager

db = SQLAlchemy()                # Creating an instance of SQLAlchemy
bcrypt = Bcrypt()                # Creating an instance of Bcrypt
cors = CORS()                    # Credentialed CORS for the separate-origin front end
login_manager = LoginManager()   # Token-cookie gate, wired up in auth.init_gate
