"""File storage interface, local driver, driver factory and manager."""