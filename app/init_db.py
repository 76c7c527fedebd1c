from app.database import Base, engine
import app.models  # noqa: F401  registers all models on Base.metadata


def main():
    Base.metadata.create_all(bind=engine)
    print("✅ Tables created successfully")


if __name__ == "__main__":
    main()
