from setuptools import setup, find_packages

setup(
    name="signage-cms",
    version="0.1.0",
    description="Digital signage CMS: layout aggregate and OAuth application registration",
    author="Matt Skillman",
    packages=find_packages(include=["signage", "signage.*"]),
    package_data={"signage": ["templates/*.html", "templates/applications/*.html"]},
    python_requires=">=3.8",
    install_requires=[
        "Flask>=3.0.0",
        "Flask-SQLAlchemy>=3.1.0",
        "SQLAlchemy>=2.0.0",
        "Flask-Migrate>=4.0.0",
        "Flask-Login>=0.6.3",
        "Flask-Limiter>=3.5.0",
        "flask-talisman>=1.1.0",
        "Werkzeug>=3.0.0",
        "Authlib>=1.5.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "black>=23.0.0",
            "pylint>=2.17.0",
        ]
    },
)
