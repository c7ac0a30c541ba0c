from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging
from app.models.user import User
from app.models.product import Product
from app.core.config import settings
from app.core.security import hash_password

logger = logging.getLogger(__name__)


SAMPLE_CAKES = [
    {
        "name": "Chocolate Truffle Cake",
        "description": "Rich chocolate layers with truffle cream and dark chocolate ganache",
        "price": 299,
        "image": "https://www.fnp.com/images/pr/l/v20221205201109/chocolate-truffle-cake-half-kg_1.jpg",
        "category": "birthday",
    },
    {
        "name": "Vanilla Berry Cake",
        "description": "Light vanilla sponge with fresh mixed berries and whipped cream",
        "price": 249,
        "image": "https://www.fnp.com/images/pr/l/v20221205201212/vanilla-fresh-cream-cake-half-kg_1.jpg",
        "category": "birthday",
    },
    {
        "name": "Red Velvet Cake",
        "description": "Classic red velvet with cream cheese frosting",
        "price": 349,
        "image": "https://www.fnp.com/images/pr/l/v20221205201156/red-velvet-fresh-cream-cake-half-kg_1.jpg",
        "category": "birthday",
    },
    {
        "name": "Black Forest Cake",
        "description": "Chocolate sponge with cherries and whipped cream",
        "price": 399,
        "image": "https://www.fnp.com/images/pr/l/v20221205201116/black-forest-cake-half-kg_1.jpg",
        "category": "birthday",
    },
    {
        "name": "Butterscotch Cake",
        "description": "Soft vanilla cake with butterscotch chips and caramel",
        "price": 279,
        "image": "https://www.fnp.com/images/pr/l/v20221205201120/butterscotch-cake-half-kg_1.jpg",
        "category": "birthday",
    },
]


def _ensure_admin(db: Session) -> None:
    admin_email = settings.DEFAULT_ADMIN_EMAIL
    admin = db.query(User).filter(User.email == admin_email).first()
    if admin:
        logger.info("admin_user_exists email=%s", admin_email)
        return

    seed_password = (settings.DEFAULT_ADMIN_PASSWORD or "").strip()
    if not seed_password:
        message = (
            "Missing admin bootstrap credentials: set DEFAULT_ADMIN_PASSWORD "
            "or create an admin user manually before launch."
        )
        if settings.ENVIRONMENT == "production":
            logger.error("%s env=%s", message, settings.ENVIRONMENT)
            raise RuntimeError(message)
        logger.warning("%s env=%s", message, settings.ENVIRONMENT)
        return

    db.add(
        User(
            name="Admin",
            email=admin_email,
            password_hash=hash_password(seed_password),
            is_admin=True,
        )
    )
    try:
        db.commit()
    except IntegrityError:
        # Another process seeded the admin between our check and insert
        db.rollback()
        logger.info("admin_user_exists email=%s", admin_email)
        return
    logger.info("admin_user_created email=%s", admin_email)


def _ensure_catalog(db: Session) -> int:
    created = 0
    for cake in SAMPLE_CAKES:
        existing = db.query(Product.id).filter(Product.name == cake["name"]).first()
        if not existing:
            db.add(Product(**cake))
            created += 1
            logger.info("sample_product_created name=%s", cake["name"])
    db.commit()
    return created


def ensure_seeded(db: Session) -> None:
    """Create the default admin and sample catalogue if absent. Safe to re-run."""
    _ensure_admin(db)
    if settings.SEED_SAMPLE_CATALOG:
        created = _ensure_catalog(db)
        logger.info("catalog_seeded created=%s", created)


if __name__ == "__main__":
    from app.db.session import SessionLocal
    db = SessionLocal()
    try:
        ensure_seeded(db)
    finally:
        db.close()
