"""
Load testing and benchmarking for the best-price matching engine.

Generates random exchange snapshots and customer orders and measures
how quickly the engine allocates them.
"""

import random
import time
from decimal import Decimal
from typing import List, Dict, Any
import statistics

from src.core.matching_engine import BestPriceMatchingEngine
from src.core.order import Order, OrderEntry
from src.core.order_book import Balance, ExchangeSnapshot, OrderBook
from src.core.order_types import OrderKind, OrderSide
from src.utils.performance import benchmark_function, get_performance_monitor


def _random_order(side: OrderSide, low: float, high: float) -> Order:
    return Order(
        side=side,
        kind=random.choice([OrderKind.LIMIT, OrderKind.MARKET]),
        amount=Decimal(str(round(random.uniform(0.01, 5.0), 8))),
        price=Decimal(str(round(random.uniform(low, high), 2))),
    )


class LoadTester:
    """
    Load testing utility for the matching engine.
    """

    def __init__(self, engine: BestPriceMatchingEngine):
        """Initialize load tester."""
        self.engine = engine
        self.performance_monitor = get_performance_monitor()
        self.results = []

    def generate_snapshots(self, exchange_count: int, depth: int) -> List[ExchangeSnapshot]:
        """
        Generate random exchange snapshots.

        Args:
            exchange_count: Number of exchanges
            depth: Orders per book side

        Returns:
            List of snapshots
        """
        snapshots = []
        for i in range(exchange_count):
            snapshots.append(ExchangeSnapshot(
                exchange_id=f"exchange-{i}",
                balance=Balance(
                    fiat=Decimal(str(round(random.uniform(10000, 500000), 2))),
                    crypto=Decimal(str(round(random.uniform(0.5, 20), 8))),
                ),
                order_book=OrderBook(
                    bids=[OrderEntry(_random_order(OrderSide.BUY, 45000, 50000)) for _ in range(depth)],
                    asks=[OrderEntry(_random_order(OrderSide.SELL, 50000, 55000)) for _ in range(depth)],
                ),
            ))
        return snapshots

    def benchmark_matching(self, order_count: int, exchange_count: int, depth: int) -> Dict[str, Any]:
        """
        Benchmark matching performance.

        Args:
            order_count: Number of customer orders to route
            exchange_count: Number of exchanges per snapshot list
            depth: Orders per book side

        Returns:
            Performance metrics
        """
        print(f"Benchmarking {order_count} orders over {exchange_count} exchanges x {depth} levels...")

        snapshots = self.generate_snapshots(exchange_count, depth)
        orders = [
            _random_order(random.choice([OrderSide.BUY, OrderSide.SELL]), 45000, 55000)
            for _ in range(order_count)
        ]

        start_time = time.perf_counter()
        total_fills = 0
        for order in orders:
            total_fills += len(self.engine.match(order, snapshots))
        total_time = time.perf_counter() - start_time

        system_stats = self.performance_monitor.get_system_stats()

        results = {
            "order_count": order_count,
            "exchange_count": exchange_count,
            "depth": depth,
            "total_time_seconds": total_time,
            "orders_per_second": order_count / total_time,
            "fills": total_fills,
            "average_latency_ms": (total_time / order_count) * 1000,
            "memory_usage_mb": system_stats.get("memory_rss_mb", 0),
        }

        self.results.append(results)
        return results

    def benchmark_single_match(self, exchange_count: int, depth: int) -> Dict[str, float]:
        """Time repeated matching of one large buy order."""
        snapshots = self.generate_snapshots(exchange_count, depth)
        order = Order(side=OrderSide.BUY, amount=Decimal('50'), price=Decimal('55000'))
        return benchmark_function(self.engine.match, order, snapshots)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of all benchmark results."""
        if not self.results:
            return {"message": "No benchmark results available"}

        orders_per_second = [r["orders_per_second"] for r in self.results]
        latencies = [r["average_latency_ms"] for r in self.results]

        return {
            "total_benchmarks": len(self.results),
            "orders_per_second": {
                "min": min(orders_per_second),
                "max": max(orders_per_second),
                "avg": statistics.mean(orders_per_second),
            },
            "latency_ms": {
                "min": min(latencies),
                "max": max(latencies),
                "avg": statistics.mean(latencies),
            },
            "results": self.results
        }


def run_benchmarks():
    """Run the benchmark suite."""
    print("Starting best-price matching benchmarks...")

    tester = LoadTester(BestPriceMatchingEngine())

    print("\n=== Matching Benchmarks ===")
    tester.benchmark_matching(1000, 3, 50)
    tester.benchmark_matching(1000, 10, 200)
    tester.benchmark_matching(200, 50, 1000)

    print("\n=== Single Match Timing ===")
    timing = tester.benchmark_single_match(10, 500)
    print(f"Single match (ms) - Min: {timing['min']:.3f}, Avg: {timing['avg']:.3f}, Max: {timing['max']:.3f}")

    print("\n=== Benchmark Summary ===")
    summary = tester.get_summary()
    print(f"Total benchmarks: {summary['total_benchmarks']}")
    print(f"Orders per second - Min: {summary['orders_per_second']['min']:.2f}, "
          f"Max: {summary['orders_per_second']['max']:.2f}, "
          f"Avg: {summary['orders_per_second']['avg']:.2f}")
    print(f"Latency (ms) - Min: {summary['latency_ms']['min']:.3f}, "
          f"Max: {summary['latency_ms']['max']:.3f}, "
          f"Avg: {summary['latency_ms']['avg']:.3f}")

    return summary


if __name__ == "__main__":
    run_benchmarks()
