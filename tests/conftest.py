"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Sample request payloads
"""

import os

# Settings are read at import time and DATABASE_URL is required.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
import app.models  # noqa: F401  register tables on Base.metadata
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_user_data():
    """Sample user registration payload"""
    return {
        "name": "John Doe",
        "email": "john.doe@example.com",
        "password": "hashed_password_here",
        "role": "job_seeker",
    }


@pytest.fixture
def employer(client):
    """An employer created through the API"""
    response = client.post("/v1/users", json={
        "name": "Acme Hiring",
        "email": "hiring@acme.example.com",
        "password": "hashed",
        "role": "employer",
    })
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def sample_job_data(employer):
    """Sample job posting payload owned by the employer fixture"""
    return {
        "employer_id": employer["id"],
        "title": "Software Engineer",
        "description": "Responsible for developing and maintaining software applications.",
        "location": "San Francisco, CA",
        "salary": "$120,000 - $150,000",
        "employment_type": "full_time",
    }


@pytest.fixture
def job(client, sample_job_data):
    """A job created through the API"""
    response = client.post("/v1/jobs", json=sample_job_data)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def job_seeker(client, sample_user_data):
    """A job seeker created through the API"""
    response = client.post("/v1/users", json=sample_user_data)
    assert response.status_code == 201
    return response.json()
