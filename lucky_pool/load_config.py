import os
from dotenv import load_dotenv

load_dotenv()

database_url = os.getenv("LUCKY_POOL_DATABASE_URL", "sqlite+aiosqlite:///lucky_pool.sqlite3")
pool_expiry_hours = float(os.getenv("LUCKY_POOL_EXPIRY_HOURS", "24"))
sweep_interval_hours = float(os.getenv("LUCKY_POOL_SWEEP_INTERVAL_HOURS", "1"))
max_pool_count = int(os.getenv("LUCKY_POOL_MAX_COUNT", "100"))
pool_fee = int(os.getenv("LUCKY_POOL_FEE", "10"))
random_algorithm = os.getenv("LUCKY_POOL_RANDOM_ALGORITHM", "xoshiro256pp")

if __name__ == "__main__":
    print(database_url, pool_expiry_hours, sweep_interval_hours, max_pool_count, pool_fee, random_algorithm)
