"""
Setup script for the Feedback Text Parser System.
"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="feedback-text-parser",
    version="1.0.0",
    description="Convert OCR or pasted feedback document text into categorized feedback entries",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=requirements,
    extras_require={
        "tests": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "feedback-text-parser=main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
