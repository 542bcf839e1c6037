from setuptools import setup, find_packages

setup(
    name="maileroo",
    version="0.1.0",
    description="Client library for the Maileroo transactional email API",
    author="",
    author_email="",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "email-validator>=2.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=0.19.0",
        "requests>=2.28.0",
        "httpx>=0.24.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
