"""Setup configuration for container-load-planner."""
from setuptools import setup, find_packages

setup(
    name="container-load-planner",
    version="0.1.0",
    description="Interactive container load planning: placement, stacking and load sequencing",
    author="Louis",
    author_email="",
    packages=find_packages(include=["planner", "planner.*", "manifest", "manifest.*"]),
    py_modules=["config", "run_planner"],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.10.0",
        "pyyaml>=6.0.0",
        "numpy>=2.2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=9.0.0",
            "pytest-cov>=6.0.0",
            "ruff>=0.15.0",
            "mypy>=1.19.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "load-planner=run_planner:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
