from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="school-fee-ledger",
    version="1.0.0",
    description="School fee ledger: students, fee components, payments and receipts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    py_modules=[
        'app',
        'app_models',
        'balance',
        'config',
        'errors',
        'forms',
        'health',
        'security',
        'storage',
    ],
    install_requires=[
        'Flask>=2.3.3',
        'Flask-SQLAlchemy>=3.0.5',
        'python-dotenv>=1.0.0',
        'SQLAlchemy>=2.0.43',
        'WTForms>=3.0.1',
        'Werkzeug>=2.3.7',
        'gunicorn>=21.2.0',
        'psycopg2-binary>=2.9.9',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.9',
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    entry_points={
        'console_scripts': [
            'fee-ledger=app:main',
        ],
    },
)
