"""Compare the pyODT optimizers with scikit-learn's entropy CART.

Requires the ``bench`` extra (scikit-learn, pandas).
"""
import time
import warnings

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.datasets import load_breast_cancer, load_iris, load_wine
from sklearn.model_selection import StratifiedKFold, train_test_split
from sklearn.tree import DecisionTreeClassifier

from pyODT import ODTClassifier

warnings.filterwarnings("ignore")

METHODS = ("greedy", "local_search", "multistart", "genetic")


class ODTBenchmark:
    """Train/test and cross-validated accuracy of every optimizer on toy datasets."""

    def __init__(self, base_model_params=None):
        self.base_params = base_model_params if base_model_params else {
            "max_depth": 3,
            "max_time": 30.0,
            "num_trials": 50,
            "max_generations": 5,
            "population_size": 40,
            "selection_fraction": 0.4,
        }
        self.results = {}

    def _get_fresh_model(self, method, **kwargs):
        params = self.base_params.copy()
        params.update(kwargs)
        return ODTClassifier(method=method, **params)

    def load_datasets(self):
        print("Loading datasets...")
        datasets = {}
        for name, loader in (("iris", load_iris), ("wine", load_wine), ("breast_cancer", load_breast_cancer)):
            bunch = loader()
            datasets[name] = {
                "X": pd.DataFrame(bunch.data, columns=bunch.feature_names),
                "y": pd.Series(bunch.target),
            }
        print(f"✓ Loaded {len(datasets)} datasets.")
        return datasets

    def run_comparison(self, datasets):
        print("\n" + "=" * 60)
        print("TRAIN / TEST ACCURACY VS SKLEARN")
        print("=" * 60)

        rows = []
        for name, data in datasets.items():
            print(f"\nDataset: {name.upper()}")
            X_train, X_test, y_train, y_test = train_test_split(
                data["X"], data["y"], test_size=0.3, random_state=42, stratify=data["y"]
            )

            for method in METHODS:
                model = self._get_fresh_model(method)
                t0 = time.time()
                model.fit(X_train, y_train)
                fit_time = time.time() - t0
                rows.append({
                    "dataset": name,
                    "model": method,
                    "train_acc": model.accuracy_,
                    "test_acc": model.score(X_test, y_test),
                    "fit_time": fit_time,
                })
                print(f"  {method:<13} train={model.accuracy_:.4f} test={rows[-1]['test_acc']:.4f} ({fit_time:.2f}s)")

            sk_tree = DecisionTreeClassifier(
                criterion="entropy", max_depth=self.base_params["max_depth"], random_state=42
            )
            t0 = time.time()
            sk_tree.fit(X_train, y_train)
            fit_time = time.time() - t0
            rows.append({
                "dataset": name,
                "model": "sklearn",
                "train_acc": sk_tree.score(X_train, y_train),
                "test_acc": sk_tree.score(X_test, y_test),
                "fit_time": fit_time,
            })
            print(f"  {'sklearn':<13} train={rows[-1]['train_acc']:.4f} test={rows[-1]['test_acc']:.4f}")

        self.results["comparison"] = pd.DataFrame(rows)
        return self.results["comparison"]

    def run_cross_validation(self, datasets, method="local_search", cv=5):
        print("\n" + "=" * 60)
        print(f"CROSS-VALIDATION ({method})")
        print("=" * 60)

        summary = {}
        for name, data in datasets.items():
            skf = StratifiedKFold(n_splits=cv, shuffle=True, random_state=42)
            X = data["X"].reset_index(drop=True)
            y = data["y"].reset_index(drop=True)
            scores = []
            for train_idx, val_idx in skf.split(X, y):
                model = self._get_fresh_model(method)
                model.fit(X.iloc[train_idx], y.iloc[train_idx])
                scores.append(model.score(X.iloc[val_idx], y.iloc[val_idx]))
            summary[name] = (float(np.mean(scores)), float(np.std(scores)))
            print(f"  {name}: {summary[name][0]:.4f} (+/- {summary[name][1]:.4f})")

        self.results["cv"] = summary
        return summary

    def generate_visualizations(self, path="odt_benchmark.png"):
        if "comparison" not in self.results:
            print("No results to visualize.")
            return
        table = self.results["comparison"].pivot(index="dataset", columns="model", values="train_acc")
        ax = table.plot.bar(figsize=(10, 6), rot=0)
        ax.set_ylabel("Training accuracy")
        ax.set_ylim(0, 1.1)
        ax.grid(axis="y", alpha=0.3)
        plt.tight_layout()
        plt.savefig(path)
        print(f"✓ Saved '{path}'")
        plt.close()


def run_benchmark():
    bench = ODTBenchmark()
    datasets = bench.load_datasets()
    print(bench.run_comparison(datasets).to_string(index=False))
    bench.run_cross_validation(datasets)
    bench.generate_visualizations()


if __name__ == "__main__":
    run_benchmark()
