import setuptools

with open("disclist/.version") as f:
    version = f.read().strip()

setuptools.setup(
    name="disclist",
    version=version,
    python_requires=">=3.11.0",
    license="Apache-2.0",
    entry_points={"console_scripts": ["disclist = disclist.__main__:main"]},
    packages=["disclist"],
    package_data={"disclist": [".version"]},
    install_requires=[
        "appdirs",
        "click",
        "mutagen",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
