from app.database import Base, engine
from app.models import (
    user,
    post,
    label,
    user_post_reaction,
    favorite_post,
    post_comment,
    post_view,
    subscription,
)

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("✅ All tables created successfully!")
