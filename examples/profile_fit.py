import logging

import numpy as np
from pyODT import ODTClassifier

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

rng = np.random.default_rng(0)
X = rng.normal(size=(2000, 8))
y = ((X[:, 0] > 0) ^ (X[:, 1] > 0.5)) | (X[:, 2] > 1.5)

m = ODTClassifier(method="genetic", max_depth=3, population_size=30, max_generations=5, max_time=60)
m.fit(X, y)
print(m.summary())
m.print_tree()
