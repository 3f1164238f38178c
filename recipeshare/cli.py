from __future__ import annotations

import click
from flask import Flask
from flask.cli import with_appcontext

from .extensions import db
from .models import ROLE_ADMIN, ROLE_USER, Recipe, User

SAMPLE_RECIPES = [
    {
        "owner": "user",
        "name": "Classic Spaghetti Carbonara",
        "cuisine_type": "Italian",
        "ingredients": "400g spaghetti\n200g pancetta or guanciale\n4 large eggs\n"
        "100g Pecorino Romano cheese\nBlack pepper\nSalt",
        "steps": "Cook spaghetti in salted boiling water until al dente\n"
        "Crisp the pancetta in a large pan\nBeat eggs with grated cheese and black pepper\n"
        "Drain pasta, reserving some pasta water\nToss hot pasta with pancetta\n"
        "Remove from heat and quickly mix in egg mixture\n"
        "Add pasta water to create creamy sauce\nServe immediately with extra cheese",
    },
    {
        "owner": "user",
        "name": "Chicken Tikka Masala",
        "cuisine_type": "Indian",
        "ingredients": "500g chicken breast\n1 cup yogurt\n2 tbsp tikka masala paste\n"
        "1 onion, diced\n3 cloves garlic\n1 can tomato sauce\n1 cup heavy cream\n"
        "Fresh cilantro\nBasmati rice",
        "steps": "Marinate chicken in yogurt and half the tikka paste for 2 hours\n"
        "Grill or pan-fry chicken until cooked\nSauté onion and garlic until soft\n"
        "Add remaining tikka paste and cook for 1 minute\n"
        "Add tomato sauce and simmer for 10 minutes\nStir in cream and cooked chicken\n"
        "Simmer for 5 more minutes\nGarnish with cilantro and serve with rice",
    },
    {
        "owner": "admin",
        "name": "Classic Beef Tacos",
        "cuisine_type": "Mexican",
        "ingredients": "500g ground beef\n1 packet taco seasoning\nTaco shells\n"
        "Lettuce, shredded\nTomatoes, diced\nCheddar cheese, shredded\nSour cream\nSalsa",
        "steps": "Brown ground beef in a large skillet\nDrain excess fat\n"
        "Add taco seasoning and water according to package\nSimmer until thickened\n"
        "Warm taco shells in oven\nFill shells with beef\n"
        "Top with lettuce, tomatoes, cheese\nAdd sour cream and salsa\nServe immediately",
    },
    {
        "owner": "admin",
        "name": "Pad Thai",
        "cuisine_type": "Thai",
        "ingredients": "200g rice noodles\n200g shrimp or chicken\n2 eggs\n3 tbsp fish sauce\n"
        "2 tbsp tamarind paste\n2 tbsp sugar\nBean sprouts\nPeanuts, crushed\n"
        "Lime wedges\nGreen onions",
        "steps": "Soak rice noodles in warm water for 30 minutes\n"
        "Heat oil in wok and scramble eggs, set aside\nStir-fry protein until cooked\n"
        "Add drained noodles to wok\nMix fish sauce, tamarind, and sugar\n"
        "Pour sauce over noodles and toss\nAdd bean sprouts and eggs\n"
        "Serve with peanuts, lime, and green onions",
    },
    {
        "owner": "user",
        "name": "French Onion Soup",
        "cuisine_type": "French",
        "ingredients": "4 large onions, thinly sliced\n4 tbsp butter\n1 tsp sugar\n"
        "2 cloves garlic\n8 cups beef broth\n1 cup white wine\nFrench bread slices\n"
        "Gruyere cheese\nFresh thyme",
        "steps": "Melt butter in large pot over medium heat\n"
        "Add onions and sugar, cook for 30-40 minutes until caramelized\n"
        "Add garlic and cook 1 minute\nPour in wine and scrape bottom of pot\n"
        "Add broth and thyme, simmer 30 minutes\nToast bread slices\n"
        "Ladle soup into oven-safe bowls\nTop with bread and cheese\n"
        "Broil until cheese is bubbly and golden",
    },
]


@click.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create all database tables."""

    db.create_all()
    click.echo("Initialized the database.")


@click.command("seed")
@with_appcontext
def seed_command() -> None:
    """Create sample users and recipes."""

    db.create_all()
    owners = {
        "admin": _get_or_create_user("Admin User", "admin@example.com", ROLE_ADMIN),
        "user": _get_or_create_user("John Doe", "user@example.com", ROLE_USER),
    }

    created = 0
    for sample in SAMPLE_RECIPES:
        values = dict(sample)
        owner = owners[values.pop("owner")]
        if db.session.scalar(db.select(Recipe).filter_by(name=values["name"])) is not None:
            continue
        db.session.add(Recipe(user_id=owner.id, **values))
        created += 1

    db.session.commit()
    click.echo(f"Seeded {created} recipe(s).")


def _get_or_create_user(name: str, email: str, role: str) -> User:
    user = db.session.scalar(db.select(User).filter_by(email=email))
    if user is None:
        user = User(name=name, email=email, role=role)
        db.session.add(user)
        db.session.flush()
    return user


def register_commands(app: Flask) -> None:
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_command)


__all__ = ["register_commands"]
