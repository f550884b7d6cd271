import os
import sys
import django
import random
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone
from faker import Faker

# Add project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set up Django environment
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'housing_marketplace.settings')
django.setup()

from core.bookings import cancel_booking, complete_booking, create_booking, transition_booking
from core.models import User, Listing, RATING_CATEGORIES
from core.reviews import create_review, reply_to_review

fake = Faker()


def fake_mobile():
    return f"01{random.randint(3, 9)}{random.randint(10000000, 99999999)}"


def create_users(num_tenants=10, num_owners=5):
    print(f"Creating {num_tenants} tenants and {num_owners} owners...")

    tenants = []
    owners = []

    for user_type, count, bucket in (('tenant', num_tenants, tenants), ('owner', num_owners, owners)):
        for _ in range(count):
            email = fake.unique.email()
            username = email.split('@')[0]
            user = User.objects.create_user(
                username=username,
                email=email,
                password='password123',
                first_name=fake.first_name(),
                last_name=fake.last_name(),
                mobile=fake_mobile(),
                user_type=user_type
            )
            bucket.append(user)

    print(f"Created {len(tenants)} tenants and {len(owners)} owners.")
    return tenants, owners


def create_listings(owners):
    print("Creating listings...")
    listings = []

    cities = [choice for choice, _ in Listing.CITY_CHOICES]
    name_parts = ["Green", "Lake View", "Campus", "Sunrise", "City", "Old Town"]

    for owner in owners:
        # Each owner lists 1-3 places
        for _ in range(random.randint(1, 3)):
            listing_type = random.choice(['mess', 'hostel'])
            listing = Listing.objects.create(
                owner=owner,
                title=f"{random.choice(name_parts)} {listing_type.title()}",
                address=fake.street_address(),
                city=random.choice(cities),
                listing_type=listing_type,
                rent=Decimal(random.randint(30, 120) * 100),
                deposit=Decimal(random.randint(0, 5) * 1000),
                gender_allowed=random.choice(['male', 'female', 'both']),
                description=fake.paragraph()
            )
            listings.append(listing)

    print(f"Created {len(listings)} listings.")
    return listings


def create_bookings(tenants, listings):
    print("Creating bookings...")
    bookings = []

    for tenant in tenants:
        # Each tenant makes 0-3 bookings
        for _ in range(random.randint(0, 3)):
            listing = random.choice(listings)
            move_in = timezone.localdate() + timedelta(days=random.randint(-60, 30))

            booking = create_booking(tenant, listing.id, move_in, notes=fake.sentence())

            # Walk the booking through a realistic lifecycle
            outcome = random.choice(['pending', 'rejected', 'accepted', 'completed', 'cancelled'])
            if outcome == 'rejected':
                booking = transition_booking(booking.id, 'rejected', listing.owner_id)
            elif outcome != 'pending':
                booking = transition_booking(booking.id, 'accepted', listing.owner_id)
                if outcome == 'completed':
                    booking = complete_booking(booking.id)
                elif outcome == 'cancelled':
                    booking = cancel_booking(booking.id)

            bookings.append(booking)

    print(f"Created {len(bookings)} bookings.")
    return bookings


def create_reviews(bookings):
    print("Creating reviews...")
    reviews = []

    completed_bookings = [b for b in bookings if b.status == 'completed']

    for booking in completed_bookings:
        # 70% chance of leaving a review
        if random.random() < 0.7:
            ratings = {category: random.randint(2, 5) for category in RATING_CATEGORIES}
            review = create_review(booking.id, booking.tenant_id, ratings, fake.paragraph())

            # Owners answer about half of them
            if random.random() < 0.5:
                reply_to_review(review.id, review.owner_id, fake.sentence())

            reviews.append(review)

    print(f"Created {len(reviews)} reviews.")
    return reviews


def main():
    print("Starting database population...")

    tenants, owners = create_users(num_tenants=20, num_owners=8)
    listings = create_listings(owners)
    bookings = create_bookings(tenants, listings)
    create_reviews(bookings)

    print("Database population completed successfully!")


if __name__ == '__main__':
    main()
