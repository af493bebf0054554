from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="gerowallet-e2e",
    version="1.0.0",
    author="GeroWallet QA",
    description="End-to-end UI test harness for the GeroWallet Cardano browser extension",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Testing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "flask>=3.0",
            "werkzeug>=3.0",
            "pytest-html>=4.0",
            "pytest-json-report>=1.5",
            "pytest-rerunfailures>=13.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gero-e2e-setup-wallets=gero_e2e.setup_wallets:main",
        ],
    },
)
