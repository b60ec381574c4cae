"""Setup configuration for Lowball Bot."""

from setuptools import setup, find_packages

setup(
    name="lowballbot",
    version="0.1.0",
    description="A Discord bot for car lowball submissions, a self-assign ping role, and light moderation",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.6,<2.7",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
        "prompt_toolkit>=3.0",
        "aiohttp>=3.9",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "lowballbot=lowballbot.main:main",
        ],
    },
)
