# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="textlinesreader",
    version="1.0.0",
    description="Lazy decoding of text lines from byte streams into typed records",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["textlinesreader*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
