"""
Demo of k-means++ seeding and Lloyd refinement.

This example shows how to:
1. Generate synthetic blob data
2. Seed with k-means++ and refine with the functional API
3. Fit the KMeans estimator and compare against uniform seeding
4. Visualize clusters, nearest-center cells and cost trajectories
"""

import torch
import matplotlib.pyplot as plt

from kclust import KMeans, kmeans_plusplus, refine, cost
from kclust.initialization import KMeansPlusPlusInit
from kclust.visualization import plot_clusters_2d, plot_cluster_boundaries, plot_cost_trajectory


def generate_blob_data(n_points_per_cluster=200, n_clusters=5, spread=8.0, noise_level=0.6):
    """Generate isotropic 2D blobs around randomly placed centers."""
    torch.manual_seed(42)

    centers = (torch.rand(n_clusters, 2) - 0.5) * 2 * spread

    data_list = []
    true_labels = []
    for k in range(n_clusters):
        points = centers[k] + noise_level * torch.randn(n_points_per_cluster, 2)
        data_list.append(points)
        true_labels.extend([k] * n_points_per_cluster)

    X = torch.cat(data_list, dim=0)
    true_labels = torch.tensor(true_labels)

    # Shuffle
    perm = torch.randperm(len(X))
    return X[perm], true_labels[perm]


def compute_metrics(true_labels, pred_labels):
    """Compute clustering agreement scores."""
    from sklearn.metrics import adjusted_rand_score, normalized_mutual_info_score

    true_np = true_labels.detach().cpu().numpy()
    pred_np = pred_labels.detach().cpu().numpy()
    return adjusted_rand_score(true_np, pred_np), normalized_mutual_info_score(true_np, pred_np)


def compare_seeding(X, n_clusters, n_runs=10):
    """Final cost over several seeds for k-means++ and uniform seeding."""
    results = {'k-means++': [], 'uniform': []}
    for seed in range(n_runs):
        for init in results:
            model = KMeans(n_clusters=n_clusters, init=init, random_state=seed).fit(X)
            results[init].append(model.inertia_)
    return results


def main():
    """Run the demo."""
    print("=== k-means++ / Lloyd Demo ===\n")

    X, true_labels = generate_blob_data()
    n_clusters = int(true_labels.max()) + 1
    print(f"Data shape: {X.shape}")
    print(f"Number of clusters: {n_clusters}\n")

    # Functional API
    print("Seeding with k-means++...")
    seeding = KMeansPlusPlusInit(random_state=42, verbose=1)
    initial_centers = seeding.initialize(X, n_clusters)
    print(f"Seeding cost: {cost(X, initial_centers):.4f}")

    print("\nRefining...")
    result = refine(X, initial_centers, verbose=1)
    print(f"Refinement {result.status.value} after {result.n_iter} iterations, "
          f"cost = {result.final_cost:.4f}")

    # Estimator
    print("\nFitting KMeans estimator...")
    kmeans = KMeans(n_clusters=n_clusters, random_state=42).fit(X)
    ari, nmi = compute_metrics(true_labels, kmeans.labels_)
    print(f"  Inertia: {kmeans.inertia_:.4f}")
    print(f"  Adjusted Rand Index: {ari:.3f}")
    print(f"  Normalized Mutual Information: {nmi:.3f}")

    # Seeding comparison
    print("\nComparing seeding strategies over 10 seeds...")
    results = compare_seeding(X, n_clusters)
    for init, costs in results.items():
        costs = torch.tensor(costs)
        print(f"  {init:10s}: mean cost = {costs.mean():.2f}, worst = {costs.max():.2f}")

    # Visualize
    fig, axes = plt.subplots(2, 2, figsize=(12, 10))
    plot_clusters_2d(X, true_labels, ax=axes[0, 0], show_legend=False, title='True Clusters')
    plot_cluster_boundaries(X, kmeans, ax=axes[0, 1], title='KMeans Cells')
    plot_cost_trajectory(seeding.potentials_, ax=axes[1, 0], log_scale=True,
                         xlabel='Center', ylabel='Potential', title='Seeding Potential')
    plot_cost_trajectory(result.cost_trajectory, ax=axes[1, 1], title='Refinement Cost')
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
