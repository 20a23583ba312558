from setuptools import setup, find_packages

VERSION = '0.1.0'
DESCRIPTION = 'GMR-Eval'
LONG_DESCRIPTION = 'Likelihood, log-likelihood, and information criterion (AIC/BIC) metrics for fitted Gaussian mixture regression and linear regression models.'

packages = find_packages()
# Ensure that we do not pollute the global namespace.
for p in packages:
    assert p == 'gmreval' or p.startswith('gmreval.')

# Setting up software package construction
setup(
       # name of package must match the folder name 'gmreval'
        name="gmreval",
        version=VERSION,
        description=DESCRIPTION,
        long_description=LONG_DESCRIPTION,
        packages=packages,
        license="BSD-3-Clause License",
        python_requires=">=3.10",
        install_requires=["jax", "numpy", "ngcsimlib"],
        extras_require={"test": ["pytest"]},
        keywords=['python', 'gmreval', 'gaussian-mixture-regression', 'likelihood',
                  'information-criteria', 'aic', 'bic', 'jax'],
        classifiers= [
            "Development Status :: 3 - Alpha",
            "Intended Audience :: Science/Research",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: BSD License",
            "Topic :: Scientific/Engineering",
            "Topic :: Scientific/Engineering :: Mathematics",
            "Programming Language :: Python :: 3.10",
            "Operating System :: OS Independent"
        ]
)
