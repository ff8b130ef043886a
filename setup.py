from setuptools import setup, find_packages

setup(
    name="inmatex",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml",
        "pydantic>=2",
        "beautifulsoup4",
        "requests",
        "playwright",
        "flask",
        "gradio",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "inmatex=inmatex.cli:main",
            "inmatex-server=inmatex.server:main",
            "inmatex-ui=inmatex.ui:main",
        ],
    },
)
