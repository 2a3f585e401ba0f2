"""Well-known ports scanned by --top-ports, in scan order."""

TOP_PORTS = [
    1, 7, 9, 11, 13, 17, 19, 20, 21, 22, 23, 25, 26, 37, 42, 49, 53, 67,
    68, 69, 70, 79, 80, 81, 82, 83, 84, 85, 88, 96, 98, 106, 109, 110, 111,
    113, 119, 123, 129, 135, 137, 138, 139, 143, 161, 162, 179, 199, 220,
    256, 389, 427, 443, 444, 445, 465, 500, 502, 512, 513, 514, 520, 523,
    554, 587, 623, 631, 636, 873, 901, 989, 990, 992, 993, 995, 1000, 1025,
    1080, 1099, 1194, 1214, 1337, 1352, 1433, 1434, 1512, 1521, 1720, 1723,
    1755, 1883, 1900, 2000, 2048, 2049, 2082, 2083, 2086, 2087, 20880,
    2100, 2200, 2222, 2375, 2376, 2483, 2484, 25565, 2601, 2604, 2947,
    3050, 3128, 3260, 3306, 3388, 3389, 3456, 3632, 4000, 4045, 4444, 4500,
    4786, 4848, 5000, 5353, 5432, 5555, 5632, 5800, 5900, 5901, 5985, 6000,
    6379, 6646, 6667, 7000, 7001, 7070, 7777, 8000, 8080, 8081, 8088, 8181,
    8222, 8443, 8888, 9000, 9090, 9200, 9300, 9999, 10000, 11211, 27017,
    27018, 50050, 50051
] + list(range(60001, 60201))
