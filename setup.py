from setuptools import find_packages, setup


setup(
    name="project-crosswind",
    version="0.1.0",
    description="Trajectory simulation, loss-of-separation and hotspot analytics for flight schedules",
    package_dir={"": "src"},
    packages=find_packages("src", include=["project_crosswind", "project_crosswind.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "geopy",
        "geographiclib",
        "rich",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "crosswind=project_crosswind.cli:main",
        ],
    },
)
