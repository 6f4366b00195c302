from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="do-app-autoscaler",
    version="0.1.0",
    description="Autoscaler for DigitalOcean App Platform services driven by a Prometheus metric",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        "requests>=2.28.0",
        "retry>=0.9.2",
        "python-dotenv>=1.0.0",
        "Flask>=2.2.0",
        "Werkzeug>=2.2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "app-autoscaler=app_autoscaler.main:main",
        ],
    },
)
