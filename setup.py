# setup.py
from setuptools import setup, find_packages

setup(
    name="spendlog",
    version="0.1.0",
    description="A small expense tracker with category totals, filters and a bar chart",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"expense_tracker": ["templates/*.html"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "python-dotenv>=1.0",
        "fastapi>=0.110",
        "jinja2>=3.0",
        "python-multipart>=0.0.6",
        "uvicorn>=0.20",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "spendlog=expense_tracker.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
