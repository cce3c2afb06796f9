from setuptools import setup, find_namespace_packages

setup(
    name="sitesurvey",
    version="0.1.0",
    packages=find_namespace_packages(include=["sitesurvey*"]),
    include_package_data=True,
    install_requires=[
        "python-dotenv>=0.19.0",
        "pydantic>=2.0",
        "pandas>=1.3.0",
        "python-json-logger>=2.0.2",
        "pyyaml>=5.4.1",
        "click>=8.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.2.5",
            "pytest-cov>=2.12.0",
            "black>=21.5b2",
            "flake8>=3.9.2",
            "mypy>=0.910"
        ]
    },
    entry_points={
        "console_scripts": [
            "survey-manager=sitesurvey.tools.survey_manager:cli",
        ]
    },
    author="Tu Nombre",
    author_email="tu@email.com",
    description="Motor de levantamiento de infraestructura de red para edificios",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/tu-usuario/sitesurvey",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.8",
)
