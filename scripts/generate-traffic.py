#!/usr/bin/env python3
"""
Traffic generator for the shop service
Simulates shoppers signing up, browsing collections and changing their carts
"""

import requests
import random
import time
import threading
import uuid
from datetime import datetime

API_URL = "http://localhost:4000"

# Weight for actions
ACTION_WEIGHTS = {
    "browse": 0.4,
    "add_to_cart": 0.3,
    "remove_from_cart": 0.15,
    "view_cart": 0.15,
}

def get_headers(token):
    return {"auth-token": token}

def log(message):
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] {message}")

class Shopper:
    def __init__(self, shopper_id):
        self.shopper_id = shopper_id
        self.email = f"{shopper_id}-{uuid.uuid4().hex[:8]}@example.com"
        self.password = uuid.uuid4().hex
        self.token = None
        self.products = []

    def signup(self):
        """Create an account and keep its token."""
        try:
            response = requests.post(
                f"{API_URL}/signup",
                json={"name": self.shopper_id, "email": self.email, "password": self.password},
                timeout=5
            )
            data = response.json()
            if data.get("success"):
                self.token = data["token"]
                log(f"Shopper {self.shopper_id}: Signed up as {self.email}")
                return True
            log(f"Shopper {self.shopper_id}: Signup failed - {data.get('errors')}")
        except Exception as e:
            log(f"Shopper {self.shopper_id}: Signup error - {e}")
        return False

    def login(self):
        # Simulate authentication failures (~1%)
        password = self.password if random.random() >= 0.01 else "wrong_password"
        try:
            response = requests.post(
                f"{API_URL}/login",
                json={"email": self.email, "password": password},
                timeout=5
            )
            data = response.json()
            if data.get("success"):
                self.token = data["token"]
                log(f"Shopper {self.shopper_id}: Logged in")
                return True
            log(f"Shopper {self.shopper_id}: Login failed - {data.get('errors')}")
        except Exception as e:
            log(f"Shopper {self.shopper_id}: Login error - {e}")
        return False

    def browse(self):
        path = random.choice(["/allproducts", "/newcollections", "/popularproducts"])
        try:
            response = requests.get(f"{API_URL}{path}", timeout=5)
            if response.status_code == 200:
                products = response.json()
                if path == "/allproducts":
                    self.products = products
                log(f"Shopper {self.shopper_id}: Browsed {path} ({len(products)} products)")
                return True
        except Exception as e:
            log(f"Shopper {self.shopper_id}: Failed to browse {path} - {e}")
        return False

    def change_cart(self, path):
        if not self.products:
            self.browse()
        if not self.products or not self.token:
            return False

        product = random.choice(self.products)
        try:
            response = requests.post(
                f"{API_URL}{path}",
                json={"itemId": product["id"]},
                headers=get_headers(self.token),
                timeout=5
            )
            if response.status_code == 200:
                log(f"Shopper {self.shopper_id}: {response.json()['message']} - {product['name']}")
                return True
            log(f"Shopper {self.shopper_id}: {path} failed - {response.status_code}")
        except Exception as e:
            log(f"Shopper {self.shopper_id}: {path} failed - {e}")
        return False

    def view_cart(self):
        try:
            response = requests.post(
                f"{API_URL}/getcart",
                headers=get_headers(self.token),
                timeout=5
            )
            if response.status_code == 200:
                items = sum(response.json().values())
                log(f"Shopper {self.shopper_id}: Viewing cart with {items} items")
                return True
        except Exception as e:
            log(f"Shopper {self.shopper_id}: Failed to view cart - {e}")
        return False

    def random_action(self):
        action = random.choices(
            list(ACTION_WEIGHTS.keys()),
            weights=list(ACTION_WEIGHTS.values())
        )[0]

        if action == "browse":
            return self.browse()
        elif action == "add_to_cart":
            return self.change_cart("/addtocart")
        elif action == "remove_from_cart":
            return self.change_cart("/removefromcart")
        elif action == "view_cart":
            return self.view_cart()

def shopper_session(shopper_id, duration_seconds):
    """Simulate one shopper from signup until the session ends."""
    shopper = Shopper(shopper_id)
    end_time = time.time() + duration_seconds

    shopper.browse()
    if not shopper.signup():
        return
    time.sleep(random.uniform(0.2, 0.5))
    shopper.login()

    while time.time() < end_time:
        shopper.random_action()
        time.sleep(random.uniform(0.3, 1.0))

def generate_traffic(num_concurrent_users=5, session_duration=60):
    """Generate traffic with multiple concurrent shoppers"""
    log(f"Starting traffic generation with {num_concurrent_users} concurrent shoppers")
    log(f"Session duration: {session_duration} seconds")

    threads = []

    try:
        while True:
            while len([t for t in threads if t.is_alive()]) < num_concurrent_users:
                shopper_id = f"shopper_{random.randint(1000, 9999)}"
                thread = threading.Thread(
                    target=shopper_session,
                    args=(shopper_id, session_duration)
                )
                thread.start()
                threads.append(thread)

                time.sleep(random.uniform(1, 3))

            # Clean up finished threads
            threads = [t for t in threads if t.is_alive()]
            time.sleep(5)

    except KeyboardInterrupt:
        log("\nStopping traffic generation...")
        log("Waiting for active sessions to complete...")
        for thread in threads:
            thread.join(timeout=10)
        log("Traffic generation stopped")

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate traffic for the shop service")
    parser.add_argument(
        "--users",
        type=int,
        default=5,
        help="Number of concurrent shoppers (default: 5)"
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=60,
        help="Session duration in seconds (default: 60)"
    )
    parser.add_argument(
        "--url",
        type=str,
        default="http://localhost:4000",
        help="API URL (default: http://localhost:4000)"
    )

    args = parser.parse_args()
    API_URL = args.url

    log("=" * 60)
    log("Shop Service Traffic Generator")
    log("=" * 60)
    log(f"API URL: {API_URL}")
    log(f"Concurrent Shoppers: {args.users}")
    log(f"Session Duration: {args.duration}s")
    log("=" * 60)

    generate_traffic(args.users, args.duration)
