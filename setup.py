# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="rblxsync",
    version="1.0.0",
    description="Pull and push Roblox script sources through the Open Cloud API",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["rblxsync", "rblxsync.*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        'console_scripts': [
            'rblxsync=rblxsync.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
