from setuptools import setup, find_packages

setup(
    name="alnrefine",
    version="0.1.0",
    description="Conversion of MAF alignments to FASTA and refinement of multiple sequence alignments",
    packages=find_packages(include=["alnrefine", "alnrefine.*"]),
    install_requires=[
        "biopython",
        "tqdm",
        "colorama"
    ],
    extras_require={
        "test": [
            "pytest"
        ],
    },
    entry_points={
        'console_scripts': [
            'alnrefine=alnrefine.pipeline:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.7",
)
