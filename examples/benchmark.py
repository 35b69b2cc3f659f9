import os
import sys

# Add the src directory to Python path to import local sparsemat
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


from sparsemat import SparseBenchmark, BenchmarkConfig



def sparse_vs_dense():
    """Time sparse against dense multiplication and print the report."""

    # config = BenchmarkConfig(sizes=[250], sparsities=[0.01])
    config = BenchmarkConfig(num_runs=3, seed=0, verify=True)
    benchmark = SparseBenchmark(config=config)
    benchmark.run()
    results = benchmark.get_results()

    benchmark.export_to_file('./benchmark_results')

    print("speedup per size (sparsest setting):")
    sparsest = results[results['sparsity'] == results['sparsity'].min()]
    for _, row in sparsest.iterrows():
        print(f"{int(row['size'])}: {row['speedup']:.2f}x")



if __name__ == "__main__":

    sparse_vs_dense()
