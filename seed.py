from datetime import timedelta

from werkzeug.security import generate_password_hash

from app import create_app
from model import Banner, Company, GalleryItem, Role, User, db
from services import flights
from status import utcnow

app = create_app()

with app.app_context():
    db.drop_all()  # start from an empty database
    db.create_all()

    admin = User(email="admin@oshair.kg", password=generate_password_hash("admin123"),
                 name="Admin", role=Role.ADMIN.value)
    manager = User(email="manager@oshair.kg", password=generate_password_hash("manager123"),
                   name="Aibek Manager", role=Role.COMPANY_MANAGER.value)
    traveller = User(email="elina@oshair.kg", password=generate_password_hash("elina123"),
                     name="Elina", role=Role.USER.value)
    db.session.add_all([admin, manager, traveller])
    db.session.commit()

    company = Company(name="Osh Avia", code="OSH", manager_id=manager.id)
    db.session.add(company)
    db.session.commit()

    now = utcnow().replace(minute=0, second=0, microsecond=0)
    routes = [
        ("OA101", "Osh", "Bishkek", 2, 55, 4500, 3000),
        ("OA102", "Bishkek", "Osh", 3, 55, 4500, 3000),
        ("OA201", "Osh", "Moscow", 5, 270, 21000, 12000),
        ("OA301", "Bishkek", "Istanbul", 7, 330, 26000, 15000),
    ]
    for number, origin, destination, days, minutes, business, economy in routes:
        departure = now + timedelta(days=days, hours=8)
        flights.create_flight({
            "flightNumber": number,
            "origin": origin,
            "destination": destination,
            "departureDate": departure.isoformat(),
            "arrivalDate": (departure + timedelta(minutes=minutes)).isoformat(),
            "duration": minutes,
            "companyId": company.id,
            "economyPrice": economy,
            "economySeats": 120,
            "comfortPrice": round((economy + business) / 2),
            "comfortSeats": 24,
            "businessPrice": business,
            "businessSeats": 12,
        })

    db.session.add_all([
        Banner(title="Summer sale", description="Up to 30% off flights to Istanbul",
               image_url="https://images.unsplash.com/photo-1436491865332-7a61a109cc05?w=800&h=400&fit=crop",
               duration=14, type="promotion"),
        Banner(title="Fly business", description="Lounge access on every business ticket",
               image_url="https://images.unsplash.com/photo-1469474968028-56623f02e42e?w=800&h=400&fit=crop",
               link="https://oshair.kg/business", duration=30, type="advertisement"),
        GalleryItem(title="Our A320", description="The newest aircraft in the fleet",
                    image_url="https://images.unsplash.com/photo-1556388158-158ea5ccacbd?w=800", category="aircraft"),
        GalleryItem(title="Sulaiman-Too", description="The sacred mountain of Osh",
                    image_url="https://images.unsplash.com/photo-1488646953014-85cb44e25828?w=800", category="destination"),
    ])
    db.session.commit()
    print("Test data added! Logins: admin@oshair.kg / manager@oshair.kg / elina@oshair.kg")
