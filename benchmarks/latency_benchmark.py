import time
import numpy as np
import concurrent.futures
from geoguard import GeoGuard, LoginAttempt
from geoguard.geo.static import StaticGeoLocator
from geoguard.history.store import InMemoryHistoryStore
from geoguard.rules import (
    CountryMismatchRule,
    DataCenterRule,
    FingerprintRule,
    GeofencingRule,
    IPGPSRule,
    OpenProxyRule,
    TimezoneRule,
    VelocityRule,
)

NETWORKS = {
    "88.230.100.0/24": {
        "country_code": "TR",
        "city_geoname_id": 745044,
        "city_name": "Istanbul",
        "latitude": 41.0082,
        "longitude": 28.9784,
        "timezone": "Europe/Istanbul",
        "asn": 9121,
        "org_name": "Turk Telekom",
    },
    "81.2.69.0/24": {
        "country_code": "GB",
        "city_geoname_id": 2643743,
        "city_name": "London",
        "latitude": 51.5074,
        "longitude": -0.1278,
        "timezone": "Europe/London",
        "asn": 20712,
        "org_name": "Andrews & Arnold Ltd",
    },
}

def create_engine():
    # Large proxy list so the blacklist lookup is realistically sized
    proxy_ips = [f"10.{i // 256}.{i % 256}.1" for i in range(20000)]
    return GeoGuard(
        geo_locator=StaticGeoLocator.from_dict(NETWORKS),
        history_store=InMemoryHistoryStore(),
        rules=[
            GeofencingRule(39.0, 35.0, 1500.0, risk_score=50),
            DataCenterRule.default(risk_score=30),
            OpenProxyRule(proxy_ips, risk_score=40),
            IPGPSRule(50.0, risk_score=40),
            TimezoneRule(risk_score=45),
            VelocityRule(900.0, risk_score=80),
            FingerprintRule(risk_score=35),
            CountryMismatchRule(risk_score=25),
        ],
    )

def create_attempt(user_id="user_bench_001", ip_address="81.2.69.142"):
    return LoginAttempt(
        user_id=user_id,
        ip_address=ip_address,
        device_latitude=51.5,
        device_longitude=-0.12,
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0.0.0",
        accept_language="en-GB",
        client_timezone="Europe/London",
    )

def run_latency_benchmark(iterations=1000):
    engine = create_engine()
    # Stateful rules need a previous login to do real work
    engine.validate_and_store(create_attempt(ip_address="88.230.100.50"))
    attempt = create_attempt()

    print(f"--- Latency Benchmark ({iterations} iterations) ---")

    latencies = []

    # Warmup
    engine.validate(attempt)

    for i in range(iterations):
        start_time = time.perf_counter()
        engine.validate(attempt)
        end_time = time.perf_counter()

        latency_ms = (end_time - start_time) * 1000
        latencies.append(latency_ms)

        if (i + 1) % 200 == 0:
            print(f"  Completed {i + 1}/{iterations} iterations")

    print("\nLatency Results:")
    print(f"  Mean:   {np.mean(latencies):.3f} ms")
    print(f"  Median: {np.median(latencies):.3f} ms")
    print(f"  P95:    {np.percentile(latencies, 95):.3f} ms")
    print(f"  P99:    {np.percentile(latencies, 99):.3f} ms")
    print("-" * 40)
    return latencies

def run_throughput_benchmark(total_requests=5000, concurrent_users=10):
    engine = create_engine()
    attempts = [create_attempt(user_id=f"user_{i % 100}") for i in range(total_requests)]

    print(f"\n--- Throughput Benchmark ({total_requests} requests, {concurrent_users} concurrent) ---")

    start_time = time.perf_counter()

    with concurrent.futures.ThreadPoolExecutor(max_workers=concurrent_users) as executor:
        futures = [executor.submit(engine.validate_and_store, attempt) for attempt in attempts]
        concurrent.futures.wait(futures)

    end_time = time.perf_counter()
    total_time = end_time - start_time

    throughput = total_requests / total_time

    print(f"\nThroughput Results:")
    print(f"  Total Time: {total_time:.2f} s")
    print(f"  Throughput: {throughput:.2f} requests/sec")
    print("-" * 40)
    return throughput

if __name__ == "__main__":
    run_latency_benchmark()
    run_throughput_benchmark()
