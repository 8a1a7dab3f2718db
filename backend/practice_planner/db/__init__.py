# Database package: ORM models and the transactional Store
