"""Database seeder: demo accounts and posts for local development."""
import argparse
import asyncio
import time

from blogcore.database import engine, async_session, Base
from blogcore.models import Post, User, UserRole
from blogcore.security import hash_password

SEED_USERS = [
    ("admin@example.com", "Admin", "User", "admin123", UserRole.ADMIN),
    ("john@example.com", "John", "Doe", "password123", UserRole.USER),
    ("jane@example.com", "Jane", "Smith", "password123", UserRole.USER),
    ("bob@example.com", "Bob", "Johnson", "password123", UserRole.USER),
]

# (title, content, published, author email)
SEED_POSTS = [
    (
        "Welcome to Our Platform",
        "This is the first post on our platform. We are excited to have you here!",
        True,
        "admin@example.com",
    ),
    (
        "Getting Started with GraphQL",
        "GraphQL is a query language for APIs and a runtime for executing those queries.",
        True,
        "admin@example.com",
    ),
    (
        "FastAPI Best Practices",
        "Dependencies, routers and typed schemas: a few habits that keep a service tidy.",
        True,
        "john@example.com",
    ),
    (
        "My Journey with Type Hints",
        "Here is my experience adding type hints to a production codebase.",
        False,
        "jane@example.com",
    ),
    (
        "Understanding Authentication",
        "Authentication is the process of verifying who someone is. Let us compare the common methods.",
        True,
        "john@example.com",
    ),
    (
        "Database Design Principles",
        "Learn about normalization, indexing, and other concepts behind a scalable schema.",
        True,
        "admin@example.com",
    ),
    (
        "REST vs GraphQL",
        "Both REST and GraphQL are popular approaches to building APIs. When should you use each?",
        False,
        "bob@example.com",
    ),
    (
        "Docker for Beginners",
        "Docker is a platform for developing, shipping, and running applications in containers.",
        True,
        "jane@example.com",
    ),
]


async def seed(echo: bool = False):
    start = time.perf_counter()
    engine.echo = echo

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        users: dict[str, User] = {}
        for email, first_name, last_name, password, role in SEED_USERS:
            user = User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                password_hash=hash_password(password),
                role=role,
            )
            session.add(user)
            users[email] = user
        await session.flush()
        print(f"  Created {len(users)} users")

        created = 0
        for title, content, published, author_email in SEED_POSTS:
            author = users.get(author_email)
            if author is None:
                print(f"  Author not found for post: {title}")
                continue
            session.add(Post(title=title, content=content, published=published, author_id=author.id))
            created += 1
        await session.flush()
        print(f"  Created {created} posts")

        await session.commit()

    await engine.dispose()
    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print("  Admin login: admin@example.com / admin123")


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--echo", action="store_true", help="Log every SQL statement")
    args = parser.parse_args()
    asyncio.run(seed(echo=args.echo))


if __name__ == "__main__":
    main()
