# models_auth.py
from datetime import datetime, timedelta
import random
from extensions import db

ROLES = ("admin", "realtor", "vendor", "client")


def gen_code(n=6): return "".join(str(random.randint(0, 9)) for _ in range(n))


class User(db.Model):
    __tablename__ = "auth_user"
    pk         = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # public id (timestamp string or kw_<ts>); signup does not check uniqueness
    id         = db.Column(db.String(64), index=True, nullable=False)
    email      = db.Column(db.String(200), index=True, nullable=False)
    name       = db.Column(db.String(200))
    role       = db.Column(db.String(32), default="client")  # admin|realtor|vendor|client
    company    = db.Column(db.String(200))
    phone      = db.Column(db.String(32))
    password_hash = db.Column(db.String(256))

    def to_dict(self):
        d = {"id": self.id, "email": self.email, "name": self.name, "role": self.role}
        if self.company: d["company"] = self.company
        if self.phone: d["phone"] = self.phone
        return d


class VerificationCode(db.Model):
    __tablename__ = "auth_verification_code"
    id         = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    email      = db.Column(db.String(200), index=True, nullable=False)
    code       = db.Column(db.String(8), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    used       = db.Column(db.Boolean, default=False)

    @staticmethod
    def new(email: str, ttl_sec: int = 600):
        return VerificationCode(email=email, code=gen_code(6),
                                expires_at=datetime.utcnow() + timedelta(seconds=ttl_sec))

    def expired(self, now=None) -> bool:
        return (now or datetime.utcnow()) > self.expires_at
