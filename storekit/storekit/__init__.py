import os

# PyMySQL is only swapped in when explicitly requested
if os.environ.get("MYSQL_USE_PYMYSQL") == "1":
    import pymysql

    pymysql.install_as_MySQLdb()
